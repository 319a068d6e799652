"""
tab_easymotion

Jump to any open tab by typing a short hint.
 - core: hint generation, registry, usage heat, incremental matching
 - session: the message channel between the core and the presentation side
 - utils: config, logging, persistence, display formatting
"""

__version__ = "0.1.0"
