"""
Exec credential plugins, as used by cloud providers' CLIs in kubeconfigs.

The plugin is a command that prints an ``ExecCredential`` object to stdout:
``{"apiVersion": "client.authentication.k8s.io/v1", "status": {"token": "..."}}``.
Only the token is used; the expiration is not tracked, the token is re-fetched
on every explicit refresh of the credentials.

.. seealso::
    https://kubernetes.io/docs/reference/access-authn-authz/authentication/#client-go-credential-plugins
"""
import collections.abc
import json
import logging
import os
import subprocess
from typing import Any, Dict, Mapping, Optional

from kubecrud._cogs.structs import credentials

logger = logging.getLogger(__name__)

# Keep as a constant to make it patchable.
EXEC_TIMEOUT: Optional[float] = 60


def build_env(exec_config: Mapping[str, Any]) -> Dict[str, str]:
    """
    The full environment of the plugin's process.

    The extra variables are only passed to the child process: our own
    environment is never modified, not even temporarily.
    """
    extra = {str(item['name']): str(item['value'])
             for item in exec_config.get('env') or []
             if isinstance(item, collections.abc.Mapping) and 'name' in item and 'value' in item}
    return {**os.environ, **extra}


def execute(exec_config: Mapping[str, Any]) -> str:
    """
    Run the plugin and extract the bearer token from its output.
    """
    command = exec_config.get('command')
    if not command:
        raise credentials.AuthenticationError("Exec plugin missing command.")

    args = [str(arg) for arg in exec_config.get('args') or []]
    logger.debug(f"Executing the exec credential plugin: {command!r}")
    try:
        result = subprocess.run(
            [str(command)] + args,
            env=build_env(exec_config),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=EXEC_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise credentials.AuthenticationError(f"Exec plugin failed to execute: {e}") from e

    stdout = result.stdout.decode('utf-8', errors='replace')
    stderr = result.stderr.decode('utf-8', errors='replace').strip()
    if result.returncode != 0 and stderr:
        raise credentials.AuthenticationError(
            f"Exec plugin failed with exit code {result.returncode}: {stderr}")
    if not stdout.strip():
        raise credentials.AuthenticationError("Exec plugin failed to execute: no output.")

    try:
        payload = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise credentials.AuthenticationError("Exec plugin returned invalid response.") from e

    status = payload.get('status') if isinstance(payload, collections.abc.Mapping) else None
    token = status.get('token') if isinstance(status, collections.abc.Mapping) else None
    if not token or not isinstance(token, str):
        raise credentials.AuthenticationError("Exec plugin returned invalid response.")
    return token
