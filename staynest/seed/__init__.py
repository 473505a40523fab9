from .sample_properties import sample_properties, SEED_HOST

__all__ = ['sample_properties', 'SEED_HOST']
