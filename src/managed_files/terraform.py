"""
Terraform output for managed files.

Collects resource declarations and the file assets they reference, then
writes them as a Terraform JSON configuration. Nothing here touches the
storage backend; the provisioning tool applies the output later.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import DuplicateResourceError

__all__ = ["TerraformWriter", "TerraformTarget", "sanitize_name"]

logger = logging.getLogger(__name__)


def sanitize_name(name: str) -> str:
    """
    Turn an arbitrary name into a valid Terraform resource name.

    Characters other than letters, digits, '_' and '-' become '-', and a
    leading digit gets a '_' prefix.
    """
    if not name:
        raise ValueError("Terraform resource name cannot be empty")
    sanitized = re.sub(r"[^a-zA-Z0-9_-]", "-", name)
    if sanitized[0].isdigit():
        sanitized = "_" + sanitized
    return sanitized


class TerraformWriter:
    """
    Accumulates Terraform resources, provider configurations and file assets in memory.

    Output layout:
        main.tf.json
        data/<type>_<name>_<key>
    """

    def __init__(self) -> None:
        self.providers: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.resources: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.files: Dict[str, bytes] = {}

    def declare_provider(self, provider: str, alias: str, config: Dict[str, Any]) -> str:
        """
        Declare an aliased provider configuration once per writer.

        Returns:
            The reference resources use in their "provider" argument, e.g. "aws.files"

        Raises:
            DuplicateResourceError: If the alias was declared with a different configuration
        """
        aliases = self.providers.setdefault(provider, {})
        body = {"alias": alias, **config}
        existing = aliases.get(alias)
        if existing is not None and existing != body:
            raise DuplicateResourceError(
                f"provider {provider}.{alias} already declared with {existing}, not {body}"
            )
        aliases[alias] = body
        return f"{provider}.{alias}"

    def add_file_bytes(self, resource_type: str, resource_name: str, key: str, data: bytes) -> str:
        """
        Register a file asset and return the expression that reads it.

        Returns:
            Terraform expression like ${file("${path.module}/data/...")}

        Raises:
            DuplicateResourceError: If the resource was already declared
        """
        name = self._check_unique(resource_type, resource_name)
        rel_path = f"data/{resource_type}_{name}_{key}"
        if rel_path in self.files:
            raise DuplicateResourceError(f"duplicate Terraform file asset {rel_path}")
        self.files[rel_path] = bytes(data)
        return '${file("${path.module}/' + rel_path + '")}'

    def render_resource(self, resource_type: str, resource_name: str, body: Dict[str, Any]) -> None:
        """
        Declare a resource.

        Raises:
            DuplicateResourceError: If a resource with the same type and name was already declared
        """
        name = self._check_unique(resource_type, resource_name)
        self.resources.setdefault(resource_type, {})[name] = dict(body)
        logger.debug(f"Declared Terraform resource {resource_type}.{name}")

    def _check_unique(self, resource_type: str, resource_name: str) -> str:
        name = sanitize_name(resource_name)
        if name in self.resources.get(resource_type, {}):
            raise DuplicateResourceError(
                f"duplicate Terraform resource {resource_type}.{name} (from name {resource_name!r})"
            )
        return name

    def to_dict(self) -> Dict[str, Any]:
        """Terraform JSON document with deterministic ordering."""
        doc: Dict[str, Any] = {}
        if self.providers:
            doc["provider"] = {
                provider: [self.providers[provider][alias] for alias in sorted(self.providers[provider])]
                for provider in sorted(self.providers)
            }
        doc["resource"] = {
            resource_type: {name: self.resources[resource_type][name] for name in sorted(self.resources[resource_type])}
            for resource_type in sorted(self.resources)
        }
        return doc

    def write(self, out_dir: Union[str, Path]) -> Path:
        """
        Write main.tf.json and data assets under out_dir.

        Returns:
            Path to main.tf.json
        """
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        for rel_path, data in sorted(self.files.items()):
            target = out_dir / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        main = out_dir / "main.tf.json"
        main.write_text(json.dumps(self.to_dict(), indent=2, sort_keys=True) + "\n")
        logger.info(f"Wrote Terraform configuration to {main} ({len(self.files)} assets)")
        return main


class TerraformTarget:
    """Render target that emits Terraform declarations instead of writing objects."""

    name = "terraform"

    def __init__(self, writer: Optional[TerraformWriter] = None) -> None:
        self.writer = writer if writer is not None else TerraformWriter()

    def render(self, task, context, actual, expected, changes) -> None:
        task.render_terraform(context, self, actual, expected, changes)

    def finish(self, out_dir: Union[str, Path]) -> Path:
        return self.writer.write(out_dir)
