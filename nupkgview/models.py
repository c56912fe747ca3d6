"""Value objects describing a parsed NuGet package."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

__all__ = [
    "Dependency",
    "PackageType",
    "PackageMetadata",
    "FileEntry",
    "PackageContent",
    "FileContent",
    "MCP_SERVER_PACKAGE_TYPE",
]

MCP_SERVER_PACKAGE_TYPE = "McpServer"


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class Dependency:
    id: str
    version: Optional[str] = None
    target_framework: Optional[str] = None
    exclude: Optional[str] = None
    include: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "version": self.version,
                "targetFramework": self.target_framework,
                "exclude": self.exclude,
                "include": self.include,
            }
        )


@dataclass(frozen=True)
class PackageType:
    name: str
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"name": self.name, "version": self.version})


@dataclass(frozen=True)
class PackageMetadata:
    """Manifest fields.  Absent optional values are ``None``, lists are empty tuples."""

    id: str
    version: str
    title: Optional[str] = None
    description: Optional[str] = None
    authors: Tuple[str, ...] = ()
    owners: Tuple[str, ...] = ()
    license_url: Optional[str] = None
    license: Optional[str] = None
    license_type: Optional[str] = None
    project_url: Optional[str] = None
    repository_url: Optional[str] = None
    repository_type: Optional[str] = None
    icon_url: Optional[str] = None
    icon: Optional[str] = None
    readme: Optional[str] = None
    tags: Tuple[str, ...] = ()
    release_notes: Optional[str] = None
    copyright: Optional[str] = None
    language: Optional[str] = None
    min_client_version: Optional[str] = None
    development_dependency: bool = False
    serviceable: bool = False
    require_license_acceptance: bool = False
    dependencies: Tuple[Dependency, ...] = ()
    package_types: Tuple[PackageType, ...] = ()

    @property
    def is_mcp_server(self) -> bool:
        return any(pt.name == MCP_SERVER_PACKAGE_TYPE for pt in self.package_types)

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "version": self.version,
                "title": self.title,
                "description": self.description,
                "authors": list(self.authors),
                "owners": list(self.owners),
                "licenseUrl": self.license_url,
                "license": self.license,
                "licenseType": self.license_type,
                "projectUrl": self.project_url,
                "repositoryUrl": self.repository_url,
                "repositoryType": self.repository_type,
                "iconUrl": self.icon_url,
                "icon": self.icon,
                "readme": self.readme,
                "tags": list(self.tags),
                "releaseNotes": self.release_notes,
                "copyright": self.copyright,
                "language": self.language,
                "minClientVersion": self.min_client_version,
                "developmentDependency": self.development_dependency,
                "serviceable": self.serviceable,
                "requireLicenseAcceptance": self.require_license_acceptance,
                "dependencies": [d.to_dict() for d in self.dependencies],
                "packageTypes": [pt.to_dict() for pt in self.package_types],
            }
        )


@dataclass(frozen=True)
class FileEntry:
    """A file or directory inside the package.

    ``children`` is a tuple on directories and ``None`` on files.
    """

    path: str
    name: str
    size: int = 0
    is_directory: bool = False
    children: Optional[Tuple["FileEntry", ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "size": self.size,
            "isDirectory": self.is_directory,
        }
        if self.children is not None:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@dataclass(frozen=True)
class PackageContent:
    metadata: PackageMetadata
    files: Tuple[FileEntry, ...] = ()
    nuspec_content: Optional[str] = None
    icon_data: Optional[bytes] = field(default=None, repr=False)
    icon_path: Optional[str] = None
    readme_content: Optional[str] = field(default=None, repr=False)
    readme_path: Optional[str] = None
    license_content: Optional[str] = field(default=None, repr=False)
    license_path: Optional[str] = None
    mcp_server_content: Optional[str] = field(default=None, repr=False)
    mcp_server_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "metadata": self.metadata.to_dict(),
                "files": [f.to_dict() for f in self.files],
                "nuspecContent": self.nuspec_content,
                "iconData": base64.b64encode(self.icon_data).decode("ascii") if self.icon_data is not None else None,
                "iconPath": self.icon_path,
                "readmeContent": self.readme_content,
                "readmePath": self.readme_path,
                "licenseContent": self.license_content,
                "licensePath": self.license_path,
                "mcpServerContent": self.mcp_server_content,
                "mcpServerPath": self.mcp_server_path,
            }
        )


@dataclass(frozen=True)
class FileContent:
    path: str
    content: bytes = field(repr=False)
    mime_type: str = "application/octet-stream"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "content": base64.b64encode(self.content).decode("ascii"),
            "mimeType": self.mime_type,
        }
