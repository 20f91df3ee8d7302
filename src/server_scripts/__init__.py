"""server-scripts: registry-driven dispatcher for operational scripts.

Import from submodules:
- version: __version__
- core.models: ScriptRecord, Registry
- core.resolver: resolve, lookup
"""

from server_scripts.version import __version__ as __version__
