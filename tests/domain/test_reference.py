import pytest

from pinstore.domain.identity import PackageIdentity
from pinstore.domain.reference import (
    LocalReference,
    LocalSourceControlReference,
    PackageReference,
    ReferenceKind,
    RegistryReference,
    RemoteSourceControlReference,
    RootReference,
    reference_from_kind,
)


def test_remote_reference_computes_identity_from_url():
    ref = RemoteSourceControlReference("https://github.com/corp/Foo.git")
    assert ref.kind == ReferenceKind.REMOTE_SOURCE_CONTROL
    assert ref.identity == PackageIdentity("foo")
    assert ref.location == "https://github.com/corp/Foo.git"


def test_path_references_compute_identity_from_path():
    for cls in (RootReference, LocalReference, LocalSourceControlReference):
        ref = cls("/work/Bar")
        assert ref.identity == PackageIdentity("bar")
        assert ref.location == "/work/Bar"


def test_with_location_keeps_identity():
    ref = RemoteSourceControlReference("https://github.com/corp/baraka.git")
    moved = ref.with_location("https://mirror.corp.com/team/bar.git")
    assert isinstance(moved, RemoteSourceControlReference)
    assert moved.location == "https://mirror.corp.com/team/bar.git"
    assert moved.identity == PackageIdentity("baraka")
    assert ref.location == "https://github.com/corp/baraka.git"


def test_base_reference_cannot_be_constructed():
    with pytest.raises(TypeError):
        PackageReference()  # type: ignore[abstract]


def test_identity_is_not_a_constructor_argument():
    with pytest.raises(TypeError):
        RemoteSourceControlReference(  # type: ignore[call-arg]
            "https://github.com/corp/foo.git", identity=PackageIdentity("bar")
        )


def test_references_of_different_kinds_are_not_equal():
    assert LocalReference("/foo") != LocalSourceControlReference("/foo")
    assert LocalReference("/foo") == LocalReference("/foo")


def test_reference_from_kind_builds_each_variant():
    assert isinstance(reference_from_kind("root", "/r"), RootReference)
    assert isinstance(reference_from_kind("registry", "scope.pkg"), RegistryReference)
    assert isinstance(
        reference_from_kind(ReferenceKind.LOCAL_SOURCE_CONTROL, "/x"),
        LocalSourceControlReference,
    )


def test_reference_from_kind_rejects_unknown_kind():
    with pytest.raises(ValueError, match="fileSystem"):
        reference_from_kind("fileSystem", "/x")
