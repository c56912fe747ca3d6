"""MCP server descriptor helpers.

Packages of type ``McpServer`` ship ``.mcp/server.json``.  From it we derive
the startup block an MCP client needs to launch the server through ``dnx``::

    {
      "inputs": [{"type": "promptString", "id": "api_key", ...}],
      "servers": {"Foo.Server": {"type": "stdio", "command": "dnx", ...}}
    }
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

__all__ = [
    "generate_mcp_startup_config",
    "format_mcp_json",
]

logger = logging.getLogger(__name__)


def _env_variables(pkg: Dict[str, Any]) -> List[Dict[str, Any]]:
    env = pkg.get("environment_variables")
    if not isinstance(env, list):
        return []
    return [e for e in env if isinstance(e, dict)]


def generate_mcp_startup_config(server: Dict[str, Any]) -> Dict[str, Any]:
    """Build the ``inputs``/``servers`` startup configuration for *server*."""
    inputs: List[Dict[str, Any]] = []
    servers: Dict[str, Any] = {}

    packages = server.get("packages") if isinstance(server, dict) else None
    if not isinstance(packages, list):
        return {"inputs": inputs, "servers": servers}

    for pkg in packages:
        if not isinstance(pkg, dict) or not pkg.get("name"):
            continue
        name = pkg["name"]

        env_vars = _env_variables(pkg)
        for env_var in env_vars:
            variables = env_var.get("variables")
            if not isinstance(variables, dict):
                continue
            for var_name, var_config in variables.items():
                if isinstance(var_config, dict):
                    inputs.append(
                        {
                            "type": "promptString",
                            "id": var_name,
                            "description": var_config.get("description") or f"Configuration for {var_name}",
                            "password": bool(var_config.get("is_secret", False)),
                        }
                    )

        entry: Dict[str, Any] = {
            "type": "stdio",
            "command": "dnx",
            "args": [f"{name}@{pkg.get('version') or ''}", "--yes", "--"],
        }
        arguments = pkg.get("package_arguments")
        if isinstance(arguments, list):
            entry["args"].extend(
                arg["value"]
                for arg in arguments
                if isinstance(arg, dict) and arg.get("type") == "positional" and arg.get("value")
            )

        if "environment_variables" in pkg and isinstance(pkg["environment_variables"], list):
            env: Dict[str, str] = {}
            for env_var in env_vars:
                variables = env_var.get("variables")
                if env_var.get("name") and isinstance(variables, dict):
                    for var_name in variables:
                        env[env_var["name"]] = f"${{input:{var_name}}}"
            entry["env"] = env

        servers[name] = entry
        logger.debug("Generated MCP startup entry for %s", name)

    return {"inputs": inputs, "servers": servers}


def format_mcp_json(text: str) -> str:
    """Pretty-print *text* as two-space indented JSON; return it untouched if invalid."""
    try:
        return json.dumps(json.loads(text), indent=2)
    except ValueError:
        return text
