from .tables import build_rich_table, render_markdown, total_line

__all__ = ["build_rich_table", "render_markdown", "total_line"]
