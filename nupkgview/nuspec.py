"""Decode .nuspec manifest XML into :class:`~nupkgview.models.PackageMetadata`.

Manifests declare one of several schema namespaces
(``http://schemas.microsoft.com/packaging/2010/07/nuspec.xsd``,
``.../2013/05/nuspec.xsd`` and so on).  Elements are looked up by local name,
so any of them, or none, is accepted.

Decoding rules:

* optional text elements give their stripped text, or ``None`` when the
  element is missing or empty;
* ``developmentDependency``, ``serviceable`` and ``requireLicenseAcceptance``
  are ``True`` only for the literal text ``true``;
* ``authors``, ``owners`` and ``tags`` are comma separated lists;
* ``<dependencies>`` may hold framework ``<group>`` elements or bare
  ``<dependency>`` elements; groups win when both are present.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional, Tuple

from .errors import ManifestDecodeError
from .models import Dependency, PackageMetadata, PackageType

__all__ = ["parse_nuspec"]

logger = logging.getLogger(__name__)


def _local(tag: object) -> str:
    if not isinstance(tag, str):
        # comments and processing instructions
        return ""
    return tag.rsplit("}", 1)[-1]


def _child(parent: ET.Element, name: str) -> Optional[ET.Element]:
    for elem in parent:
        if _local(elem.tag) == name:
            return elem
    return None


def _children(parent: ET.Element, name: str) -> List[ET.Element]:
    return [elem for elem in parent if _local(elem.tag) == name]


def _text(parent: ET.Element, name: str) -> Optional[str]:
    elem = _child(parent, name)
    if elem is None:
        return None
    text = "".join(elem.itertext()).strip()
    return text or None


def _flag(parent: ET.Element, name: str) -> bool:
    # raw text, untrimmed: only a literal "true" counts
    elem = _child(parent, name)
    return elem is not None and "".join(elem.itertext()) == "true"


def _list(parent: ET.Element, name: str) -> Tuple[str, ...]:
    text = _text(parent, name)
    if not text:
        return ()
    return tuple(part.strip() for part in text.split(",") if part.strip())


def _dependency(elem: ET.Element, target_framework: Optional[str] = None) -> Dependency:
    return Dependency(
        id=elem.get("id", ""),
        version=elem.get("version"),
        target_framework=target_framework,
        exclude=elem.get("exclude"),
        include=elem.get("include"),
    )


def _dependencies(metadata: ET.Element) -> Tuple[Dependency, ...]:
    deps_elem = _child(metadata, "dependencies")
    if deps_elem is None:
        return ()

    groups = _children(deps_elem, "group")
    if groups:
        result: List[Dependency] = []
        for group in groups:
            framework = group.get("targetFramework")
            result.extend(_dependency(dep, framework) for dep in _children(group, "dependency"))
        return tuple(result)

    return tuple(_dependency(dep) for dep in _children(deps_elem, "dependency"))


def _package_types(metadata: ET.Element) -> Tuple[PackageType, ...]:
    types_elem = _child(metadata, "packageTypes")
    if types_elem is None:
        return ()
    return tuple(
        PackageType(name=pt.get("name", ""), version=pt.get("version"))
        for pt in _children(types_elem, "packageType")
    )


def parse_nuspec(text: str) -> PackageMetadata:
    """Decode manifest *text*.

    Raises :class:`ManifestDecodeError` when the XML is malformed or has no
    ``<package><metadata>`` structure.  Every other gap degrades to an absent
    value.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ManifestDecodeError(f"Manifest is not well-formed XML: {exc}") from exc

    if _local(root.tag) != "package":
        raise ManifestDecodeError(f"Unexpected manifest root element <{_local(root.tag)}>")
    metadata = _child(root, "metadata")
    if metadata is None:
        raise ManifestDecodeError("Manifest has no <metadata> element")

    license_elem = _child(metadata, "license")
    repository = _child(metadata, "repository")

    result = PackageMetadata(
        id=_text(metadata, "id") or "",
        version=_text(metadata, "version") or "",
        title=_text(metadata, "title"),
        description=_text(metadata, "description"),
        authors=_list(metadata, "authors"),
        owners=_list(metadata, "owners"),
        license_url=_text(metadata, "licenseUrl"),
        license=_text(metadata, "license"),
        license_type=license_elem.get("type") if license_elem is not None else None,
        project_url=_text(metadata, "projectUrl"),
        repository_url=repository.get("url") if repository is not None else None,
        repository_type=repository.get("type") if repository is not None else None,
        icon_url=_text(metadata, "iconUrl"),
        icon=_text(metadata, "icon"),
        readme=_text(metadata, "readme"),
        tags=_list(metadata, "tags"),
        release_notes=_text(metadata, "releaseNotes"),
        copyright=_text(metadata, "copyright"),
        language=_text(metadata, "language"),
        min_client_version=metadata.get("minClientVersion"),
        development_dependency=_flag(metadata, "developmentDependency"),
        serviceable=_flag(metadata, "serviceable"),
        require_license_acceptance=_flag(metadata, "requireLicenseAcceptance"),
        dependencies=_dependencies(metadata),
        package_types=_package_types(metadata),
    )
    logger.debug("Decoded manifest for %s %s", result.id, result.version)
    return result
