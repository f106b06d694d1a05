from harvest.writers.registry_writer import JsonlRegistryWriter, RegistryWriter

__all__ = ["JsonlRegistryWriter", "RegistryWriter"]
