from __future__ import annotations

import pytest

from nupkgview.errors import ManifestDecodeError
from nupkgview.models import Dependency, PackageType
from nupkgview.nuspec import parse_nuspec

NS_2010 = "http://schemas.microsoft.com/packaging/2010/07/nuspec.xsd"
NS_2013 = "http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd"


def _nuspec(body: str, ns: str | None = NS_2013, attrs: str = "") -> str:
    xmlns = f' xmlns="{ns}"' if ns else ""
    return f'<?xml version="1.0" encoding="utf-8"?><package{xmlns}><metadata{attrs}>{body}</metadata></package>'


FULL = _nuspec(
    """
    <id>Contoso.Utilities</id>
    <version>2.0.0-beta.1</version>
    <title>Contoso Utilities</title>
    <authors>Jane Doe, John Roe ,</authors>
    <owners>Contoso</owners>
    <description>
        Helpers for Contoso apps.
    </description>
    <license type="expression">MIT</license>
    <licenseUrl>https://licenses.nuget.org/MIT</licenseUrl>
    <projectUrl>https://contoso.example/utilities</projectUrl>
    <repository type="git" url="https://github.com/contoso/utilities.git" />
    <iconUrl>https://contoso.example/icon.png</iconUrl>
    <icon>images/icon.png</icon>
    <readme>docs/README.md</readme>
    <tags>utilities,contoso, helpers</tags>
    <releaseNotes>First beta.</releaseNotes>
    <copyright>Copyright Contoso</copyright>
    <language>en-US</language>
    <developmentDependency>true</developmentDependency>
    <serviceable>true</serviceable>
    <requireLicenseAcceptance>false</requireLicenseAcceptance>
    <packageTypes>
      <packageType name="McpServer" version="1.0.0" />
      <packageType name="Dependency" />
    </packageTypes>
    """,
    attrs=' minClientVersion="5.0"',
)


def test_full_manifest():
    meta = parse_nuspec(FULL)

    assert meta.id == "Contoso.Utilities"
    assert meta.version == "2.0.0-beta.1"
    assert meta.title == "Contoso Utilities"
    assert meta.authors == ("Jane Doe", "John Roe")
    assert meta.owners == ("Contoso",)
    assert meta.description == "Helpers for Contoso apps."
    assert meta.license == "MIT"
    assert meta.license_type == "expression"
    assert meta.license_url == "https://licenses.nuget.org/MIT"
    assert meta.project_url == "https://contoso.example/utilities"
    assert meta.repository_url == "https://github.com/contoso/utilities.git"
    assert meta.repository_type == "git"
    assert meta.icon_url == "https://contoso.example/icon.png"
    assert meta.icon == "images/icon.png"
    assert meta.readme == "docs/README.md"
    assert meta.tags == ("utilities", "contoso", "helpers")
    assert meta.release_notes == "First beta."
    assert meta.copyright == "Copyright Contoso"
    assert meta.language == "en-US"
    assert meta.min_client_version == "5.0"
    assert meta.development_dependency is True
    assert meta.serviceable is True
    assert meta.require_license_acceptance is False
    assert meta.package_types == (PackageType("McpServer", "1.0.0"), PackageType("Dependency"))
    assert meta.is_mcp_server


def test_minimal_manifest_leaves_optionals_absent():
    meta = parse_nuspec(_nuspec("<id>A</id><version>1.0.0</version>"))

    assert (meta.id, meta.version) == ("A", "1.0.0")
    assert meta.title is None
    assert meta.description is None
    assert meta.license is None
    assert meta.license_type is None
    assert meta.repository_url is None
    assert meta.authors == ()
    assert meta.owners == ()
    assert meta.tags == ()
    assert meta.dependencies == ()
    assert meta.package_types == ()
    assert not meta.is_mcp_server


def test_missing_id_and_version_become_empty_strings():
    meta = parse_nuspec(_nuspec("<id></id><title>Nameless</title>"))
    assert meta.id == ""
    assert meta.version == ""
    assert meta.title == "Nameless"


def test_empty_elements_are_absent():
    meta = parse_nuspec(_nuspec("<id>A</id><version>1</version><title>  </title><tags></tags>"))
    assert meta.title is None
    assert meta.tags == ()


@pytest.mark.parametrize("ns", [NS_2010, NS_2013, None])
def test_namespace_tolerant(ns):
    meta = parse_nuspec(_nuspec("<id>A</id><version>1</version><authors>x</authors>", ns=ns))
    assert meta.id == "A"
    assert meta.authors == ("x",)


@pytest.mark.parametrize(
    "body, expected",
    [
        ("", False),
        ("<serviceable>true</serviceable>", True),
        ("<serviceable>maybe</serviceable>", False),
        ("<serviceable>True</serviceable>", False),
        ("<serviceable> true </serviceable>", False),
        ("<serviceable>false</serviceable>", False),
    ],
)
def test_boolean_flags(body, expected):
    meta = parse_nuspec(_nuspec(f"<id>A</id><version>1</version>{body}"))
    assert meta.serviceable is expected
    assert meta.development_dependency is False
    assert meta.require_license_acceptance is False


def test_grouped_dependencies():
    meta = parse_nuspec(
        _nuspec(
            """
            <id>A</id><version>1</version>
            <dependencies>
              <group targetFramework="net6.0">
                <dependency id="Bar" version="1.0.0" />
              </group>
              <group targetFramework="net472">
                <dependency id="Baz" version="[2.0,3.0)" exclude="Build,Analyzers" />
                <dependency id="Qux" include="Compile" />
              </group>
              <group targetFramework="netstandard2.0" />
            </dependencies>
            """
        )
    )

    assert meta.dependencies == (
        Dependency(id="Bar", version="1.0.0", target_framework="net6.0"),
        Dependency(id="Baz", version="[2.0,3.0)", target_framework="net472", exclude="Build,Analyzers"),
        Dependency(id="Qux", target_framework="net472", include="Compile"),
    )


def test_flat_dependencies_have_no_framework():
    meta = parse_nuspec(
        _nuspec(
            """
            <id>A</id><version>1</version>
            <dependencies>
              <dependency id="Bar" version="[1.0.0,2.0.0)" />
              <dependency id="Baz" />
            </dependencies>
            """
        )
    )

    assert [d.id for d in meta.dependencies] == ["Bar", "Baz"]
    assert all(d.target_framework is None for d in meta.dependencies)
    assert meta.dependencies[0].version == "[1.0.0,2.0.0)"
    assert meta.dependencies[1].version is None


def test_groups_take_precedence_over_bare_dependencies():
    meta = parse_nuspec(
        _nuspec(
            """
            <id>A</id><version>1</version>
            <dependencies>
              <dependency id="Ignored" />
              <group targetFramework="net8.0"><dependency id="Kept" /></group>
            </dependencies>
            """
        )
    )
    assert [(d.id, d.target_framework) for d in meta.dependencies] == [("Kept", "net8.0")]


def test_license_type_passes_through_unknown_values():
    meta = parse_nuspec(_nuspec('<id>A</id><version>1</version><license type="file">LICENSE.txt</license>'))
    assert (meta.license, meta.license_type) == ("LICENSE.txt", "file")

    meta = parse_nuspec(_nuspec('<id>A</id><version>1</version><license type="custom">x</license>'))
    assert meta.license_type == "custom"


def test_package_type_without_name():
    meta = parse_nuspec(_nuspec('<id>A</id><version>1</version><packageTypes><packageType version="2" /></packageTypes>'))
    assert meta.package_types == (PackageType(name="", version="2"),)


def test_utf8_text_survives():
    meta = parse_nuspec(_nuspec("<id>A</id><version>1</version><authors>Zoë Ångström</authors>"))
    assert meta.authors == ("Zoë Ångström",)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not xml at all",
        "<package><metadata><id>A</id></package>",
        '<?xml version="1.0"?><project><metadata><id>A</id></metadata></project>',
        f'<package xmlns="{NS_2013}"><files /></package>',
    ],
)
def test_decode_errors(text):
    with pytest.raises(ManifestDecodeError):
        parse_nuspec(text)
