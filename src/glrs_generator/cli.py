"""Command line interface for the glrs generator."""

import argparse
import logging
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import RegistryError
from .registry import load_gl_registry
from .types import ApiGroup, ReqKind

GL_XML_URL = "https://raw.githubusercontent.com/KhronosGroup/OpenGL-Registry/main/xml/gl.xml"


@dataclass(frozen=True)
class GenerateConfig:
    api: ApiGroup
    version: Optional[str]
    profile: Optional[str]
    gl_xml: Path
    output_dir: Path


def download_gl_xml(output_path: Path, force: bool = False) -> None:
    """Download the latest gl.xml from Khronos registry."""
    if output_path.exists() and not force:
        print(f"gl.xml already exists at {output_path}. Use --force to re-download.")
        return

    print(f"Downloading gl.xml from {GL_XML_URL}...")

    try:
        urllib.request.urlretrieve(GL_XML_URL, output_path)
        print(f"Downloaded gl.xml to {output_path}")
    except (urllib.error.URLError, OSError) as e:
        print(f"Failed to download gl.xml: {e}")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate Rust OpenGL bindings")
    parser.add_argument(
        "--api",
        choices=[api.value for api in ApiGroup],
        default=ApiGroup.GL.value,
        help="Target API group (default: gl)",
    )
    parser.add_argument(
        "--version", help="Only emit constants required by this version, e.g. 4.6"
    )
    parser.add_argument(
        "--profile", help="Profile used with --version, e.g. core or compatibility"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("src/gl"),
        help="Output directory for generated files",
    )
    parser.add_argument(
        "--gl-xml", type=Path, default=Path("gl.xml"), help="Path to gl.xml file"
    )
    parser.add_argument(
        "--download",
        action="store_true",
        help="Download latest gl.xml from Khronos registry",
    )
    parser.add_argument(
        "--force", action="store_true", help="Force re-download of gl.xml"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log parsing details"
    )
    return parser


def generate(config: GenerateConfig) -> None:
    registry = load_gl_registry(config.gl_xml)
    config.output_dir.mkdir(parents=True, exist_ok=True)

    names = None
    if config.version is not None:
        required = registry.get_requirements_for_version(
            config.api, config.version, config.profile
        )
        names = {req.name for req in required if req.kind is ReqKind.ENUM}

    print("Generating gl_types.rs...")
    registry.generate_types_file(config.output_dir / "gl_types.rs", config.api)

    print("Generating gl_enums.rs...")
    registry.generate_enums_file(config.output_dir / "gl_enums.rs", config.api, names)

    (config.output_dir / "mod.rs").write_text(
        "// AUTOGENERATED. DO NOT EDIT.\n"
        "\n"
        "pub mod gl_types;\n"
        "pub mod gl_enums;\n"
        "\n"
        "pub use gl_types::*;\n"
        "pub use gl_enums::*;\n"
    )


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.download or not args.gl_xml.exists():
        download_gl_xml(args.gl_xml, args.force)

    if not args.gl_xml.exists():
        print(f"gl.xml not found at {args.gl_xml}. Use --download to fetch it.")
        sys.exit(1)

    config = GenerateConfig(
        api=ApiGroup(args.api),
        version=args.version,
        profile=args.profile,
        gl_xml=args.gl_xml,
        output_dir=args.output_dir,
    )

    label = config.api.value if config.version is None else f"{config.api.value} {config.version}"
    print(f"Generating {label} bindings...")

    try:
        generate(config)
    except RegistryError as err:
        print(f"Error: {err}")
        sys.exit(1)

    print(f"Output written to: {config.output_dir}")


if __name__ == "__main__":
    main()
