"""Terraform resource type -> Azure Retail service and attribute keys.

Two layers of definitions:
- ``DETAILED_DEFINITIONS``: several candidate SKU keys and, where the
  quantity is not simply "one", a usage extractor.
- ``SERVICE_CATALOGUE``: broad coverage with a single SKU field each.

Anything else gets a guessed service name and the generic SKU keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..config import DEFAULT_REGION_KEY, DEFAULT_SKU_KEYS, PRIVATE_LINK_SERVICE

UsageExtractor = Callable[[Dict[str, Any]], Tuple[float, str]]


@dataclass(frozen=True)
class PricingDefinition:
    service_name: str
    sku_keys: Tuple[str, ...] = ()
    region_key: str = DEFAULT_REGION_KEY
    usage_extractor: Optional[UsageExtractor] = field(default=None, compare=False)


def _parse_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def managed_disk_usage(values: Dict[str, Any]) -> Tuple[float, str]:
    size_gb = _parse_float(values.get("disk_size_gb"))
    return size_gb, f"{size_gb:.0f} GB"


# Demo figure until usage can be supplied per resource.
KEY_VAULT_SIMULATED_OPERATIONS = 20000.0


def key_vault_usage(values: Dict[str, Any]) -> Tuple[float, str]:
    ops = KEY_VAULT_SIMULATED_OPERATIONS
    return ops, f"{ops:.0f} operations"


DETAILED_DEFINITIONS: Dict[str, PricingDefinition] = {
    "azurerm_kubernetes_cluster_node_pool": PricingDefinition("Virtual Machines", ("vm_size", "sku")),
    "azurerm_kubernetes_cluster": PricingDefinition("Kubernetes Service", ("sku_tier",)),
    "azurerm_linux_virtual_machine": PricingDefinition("Virtual Machines", ("size", "vm_size", "sku")),
    "azurerm_windows_virtual_machine": PricingDefinition("Virtual Machines", ("size", "vm_size", "sku")),
    "azurerm_managed_disk": PricingDefinition("Storage", ("sku_name",), usage_extractor=managed_disk_usage),
    "azurerm_storage_account": PricingDefinition("Storage", ("account_tier", "sku_name")),
    "azurerm_private_endpoint": PricingDefinition(PRIVATE_LINK_SERVICE, ()),
    "azurerm_public_ip": PricingDefinition("IP Addresses", ("sku",)),
    "azurerm_virtual_network": PricingDefinition("Virtual Network", ()),
    "azurerm_subnet": PricingDefinition("Virtual Network", ()),
    "azurerm_key_vault": PricingDefinition("Key Vault", ("sku_name",), usage_extractor=key_vault_usage),
}

# resource type -> (serviceName, sku field or "")
SERVICE_CATALOGUE: Dict[str, Tuple[str, str]] = {
    # Compute
    "azurerm_linux_virtual_machine": ("Virtual Machines", "size"),
    "azurerm_windows_virtual_machine": ("Virtual Machines", "size"),
    # Kubernetes
    "azurerm_kubernetes_cluster": ("Kubernetes Service", "sku_tier"),
    "azurerm_kubernetes_cluster_node_pool": ("Virtual Machines", "vm_size"),
    # Containers & Databricks
    "azurerm_container_registry": ("Container Registry", "sku"),
    "azurerm_databricks_workspace": ("Databricks", "sku_name"),
    # Storage
    "azurerm_managed_disk": ("Storage", "sku_name"),
    "azurerm_disk_encryption_set": ("Storage", "sku_name"),
    "azurerm_storage_account": ("Storage", "account_tier"),
    "azurerm_storage_container": ("Storage", ""),
    "azurerm_storage_blob": ("Storage", ""),
    "azurerm_blob_data": ("Storage", ""),
    "azurerm_key_vault": ("Key Vault", "sku_name"),
    # Backup
    "azurerm_recovery_services_vault": ("Backup", "sku_name"),
    "azurerm_backup_policy_vm": ("Backup", "policy_type"),
    # Networking & CDN
    "azurerm_public_ip": ("IP Addresses", "sku"),
    "azurerm_virtual_network": ("Virtual Network", ""),
    "azurerm_subnet": ("Virtual Network", ""),
    "azurerm_network_interface": ("Network Interface", ""),
    "azurerm_network_security_group": ("Network Security Groups", ""),
    "azurerm_nat_gateway": ("Virtual Network", "sku_name"),
    "azurerm_lb": ("Load Balancer", "sku"),
    "azurerm_application_gateway": ("Application Gateway", "sku_name"),
    "azurerm_application_gateway_waf_policy": ("Application Gateway", "sku_name"),
    "azurerm_firewall": ("Azure Firewall", "sku_name"),
    "azurerm_cdn_profile": ("CDN", "sku"),
    "azurerm_data_transfer": ("Bandwidth", ""),
    # DNS
    "azurerm_dns_zone": ("DNS", ""),
    "azurerm_private_dns_zone": ("DNS", ""),
    "azurerm_private_dns_zone_virtual_network_link": ("DNS", ""),
    "azurerm_virtual_network_peering": ("Virtual Network", ""),
    # Identity & access
    "azurerm_user_assigned_identity": ("Managed Identities", ""),
    "azurerm_role_assignment": ("Role Based Access Control", ""),
    # App Services
    "azurerm_app_service_plan": ("App Service", "sku_name"),
    "azurerm_app_service": ("App Service", "sku_name"),
    # Databases
    "azurerm_sql_server": ("SQL Database", "sku_name"),
    "azurerm_sql_database": ("SQL Database", "sku_name"),
    "azurerm_postgresql_server": ("Azure Database for PostgreSQL", "sku_name"),
    "azurerm_postgresql_flexible_server": ("Azure Database for PostgreSQL", "sku_name"),
    "azurerm_mysql_server": ("Azure Database for MySQL", "sku_name"),
    "azurerm_mysql_flexible_server": ("Azure Database for MySQL", "sku_name"),
    "azurerm_cosmosdb_account": ("Azure Cosmos DB", "offer_type"),
    # Caching & messaging
    "azurerm_cache_redis": ("Azure Cache for Redis", "sku_name"),
    "azurerm_servicebus_namespace": ("Service Bus", "sku"),
    "azurerm_eventhub_namespace": ("Event Hubs", "sku"),
    "azurerm_signalr_service": ("SignalR", "sku"),
    # Integration
    "azurerm_api_management": ("API Management", "sku_name"),
    # Monitoring & analytics
    "azurerm_log_analytics_workspace": ("Log Analytics", "sku"),
    "azurerm_application_insights": ("Application Insights", "pricingTier"),
    "azurerm_monitor_diagnostic_setting": ("Monitoring", ""),
    # Automation & DevOps
    "azurerm_automation_account": ("Automation", "sku_name"),
    "azurerm_lab": ("Lab Services", "sku"),
    # IoT
    "azurerm_iothub": ("IoT Hub", "sku_name"),
    # Data & analytics
    "azurerm_data_factory": ("Data Factory", ""),
    "azurerm_synapse_workspace": ("Synapse", ""),
    # Desktop
    "azurerm_virtual_desktop_host_pool": ("Virtual Desktop", "host_pool_type"),
}


def guess_service_name(resource_type: str) -> str:
    t = resource_type or ""
    if "linux_virtual_machine" in t or "windows_virtual_machine" in t or "node_pool" in t:
        return "Virtual Machines"
    if "kubernetes_cluster" in t:
        return "Kubernetes Service"
    if "storage" in t or "disk" in t:
        return "Storage"
    return ""


@dataclass
class PricingMap:
    definitions: Dict[str, PricingDefinition] = field(default_factory=dict)

    def register(self, resource_type: str, definition: PricingDefinition) -> None:
        self.definitions[resource_type] = definition

    def update(self, overrides: Mapping[str, PricingDefinition]) -> None:
        for resource_type, definition in overrides.items():
            current = self.definitions.get(resource_type)
            if current is not None and definition.usage_extractor is None:
                # Overrides are declarative and cannot carry code; keep the extractor.
                definition = replace(definition, usage_extractor=current.usage_extractor)
            self.definitions[resource_type] = definition

    def lookup(self, resource_type: str) -> PricingDefinition:
        found = self.definitions.get(resource_type)
        if found is not None:
            return found
        return PricingDefinition(guess_service_name(resource_type), tuple(DEFAULT_SKU_KEYS))


def build_default_pricing_map() -> PricingMap:
    pmap = PricingMap()
    for resource_type, (service_name, sku_field) in SERVICE_CATALOGUE.items():
        pmap.register(resource_type, PricingDefinition(service_name, (sku_field,) if sku_field else ()))
    for resource_type, definition in DETAILED_DEFINITIONS.items():
        pmap.register(resource_type, definition)
    return pmap
