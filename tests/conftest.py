"""
Shared fixtures.

The real content (data/content.json) and real source assets (public/) are
used everywhere; unit tests that must not touch the filesystem build into a
MemoryDirectory instead.
"""

import json
from pathlib import Path

import pytest

from adapters.directories import MemoryDirectory
from core.content_loader import load_content
from core.domain.artifact import BuildArtifact, BuildMode
from core.domain.models import ContentModel
from core.services.site_builder import BuildRequest, build_site

ROOT = Path(__file__).resolve().parents[1]
CONTENT_PATH = ROOT / "data" / "content.json"
PUBLIC_DIR = ROOT / "public"
PUBLIC_ASSETS = ("favicon.ico", "portada.jpg", "avalem.webp")


@pytest.fixture(scope="session")
def content() -> ContentModel:
    return load_content(CONTENT_PATH)


@pytest.fixture
def content_data() -> dict:
    """Fresh, mutable copy of the source JSON."""
    return json.loads(CONTENT_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def public_files() -> dict:
    return {name: (PUBLIC_DIR / name).read_bytes() for name in PUBLIC_ASSETS}


@pytest.fixture(scope="session")
def dist(tmp_path_factory, content) -> BuildArtifact:
    """Production build on disk, shared by the whole session (read-only)."""
    out = tmp_path_factory.mktemp("dist")
    return build_site(BuildRequest(content=content, output_dir=out, public_dir=PUBLIC_DIR))


@pytest.fixture(scope="session")
def html(dist) -> str:
    return dist.html_path.read_text(encoding="utf-8")


@pytest.fixture
def memory_build(content, public_files):
    """(artifact, target) built entirely in memory."""
    source = MemoryDirectory(public_files)
    target = MemoryDirectory(present=False)
    artifact = build_site(
        BuildRequest(content=content, output_dir=Path("/virtual/dist"), mode=BuildMode.PRODUCTION),
        source=source,
        target=target,
    )
    return artifact, target
