"""iconforge: build-time icon generator for Tauri apps.

Renders one 1024 px PNG per platform from ``assets/icon.*``, hands each to
``tauri icon`` and reconciles the icon trees that command overwrites.
"""

__version__ = "0.4.0"
