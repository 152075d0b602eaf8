# SplitPicker Package
"""
Application picker backend for VPN split tunneling on Linux desktops.

Pipeline:
  - Desktop entries: read installed .desktop files
  - Visibility: drop entries the desktop would never show
  - Localization: pick the Name/Icon for the UI locale
  - Quirks: flag apps that misbehave when relaunched excluded
  - Icons: resolve icon names through the icon theme cascade

Launching an excluded app goes through utils.launch.
"""

__version__ = "0.1.0"
