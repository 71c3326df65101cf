from dataclasses import dataclass
from typing import Optional

STATUS_ACTIVE = "active"
STATUS_INSTALLED_INACTIVE = "installed_inactive"
STATUS_NOT_INSTALLED = "not_installed"


@dataclass(frozen=True)
class DependencySpec:
    plugin_name: str
    dependency_name: str
    dependency_uri: str = ""


@dataclass(frozen=True)
class DirectoryRecord:
    slug: str
    name: str = ""
    version: str = ""
    download_link: str = ""


@dataclass(frozen=True)
class VerificationResult:
    status: str
    plugin_file: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_ACTIVE

    @classmethod
    def active(cls, plugin_file: str) -> "VerificationResult":
        return cls(status=STATUS_ACTIVE, plugin_file=plugin_file)

    @classmethod
    def installed_inactive(cls, plugin_file: str) -> "VerificationResult":
        return cls(status=STATUS_INSTALLED_INACTIVE, plugin_file=plugin_file)

    @classmethod
    def not_installed(cls) -> "VerificationResult":
        return cls(status=STATUS_NOT_INSTALLED)
