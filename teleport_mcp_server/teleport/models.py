"""Pydantic models for the JSON emitted by ``tsh --format json`` commands."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class _TshRecord(BaseModel):
    # field types must match exactly, like a typed JSON decode would
    model_config = ConfigDict(strict=True, extra="ignore")


class NodeMetadata(_TshRecord):
    name: Optional[str] = None
    labels: Optional[Dict[str, Any]] = None


class NodeSpec(_TshRecord):
    hostname: Optional[str] = None
    addr: Optional[str] = None
    cmd_labels: Optional[Dict[str, Any]] = None


class NodeRecord(_TshRecord):
    """An SSH node as listed by ``tsh ls`` or returned by ``tsh resolve``."""

    metadata: Optional[NodeMetadata] = None
    spec: Optional[NodeSpec] = None

    @property
    def is_complete(self) -> bool:
        return self.metadata is not None and self.spec is not None

    @property
    def node_id(self) -> str:
        return (self.metadata.name if self.metadata else None) or ""

    @property
    def hostname(self) -> str:
        return (self.spec.hostname if self.spec else None) or ""

    @property
    def address(self) -> str:
        return (self.spec.addr if self.spec else None) or ""

    def merged_labels(self) -> Dict[str, Any]:
        """Static labels overlaid with the results of dynamic (command) labels."""
        labels: Dict[str, Any] = dict((self.metadata.labels if self.metadata else None) or {})
        cmd_labels = (self.spec.cmd_labels if self.spec else None) or {}
        for key, label in cmd_labels.items():
            if isinstance(label, dict) and isinstance(label.get("result"), str):
                labels[key] = label["result"]
        return labels


class KubeCluster(_TshRecord):
    """A Kubernetes cluster as listed by ``tsh kube ls``."""

    kube_cluster_name: str = ""
    labels: Optional[Dict[str, Any]] = None
    selected: bool = False

    # a JSON null reads as the zero value
    @field_validator("kube_cluster_name", mode="before")
    @classmethod
    def null_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("selected", mode="before")
    @classmethod
    def null_selected(cls, v: Any) -> Any:
        return False if v is None else v
