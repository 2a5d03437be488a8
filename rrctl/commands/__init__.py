from . import cluster, config

__all__ = ['cluster', 'config']
