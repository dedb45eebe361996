"""Basic tests for duplicity_backup package."""


def test_import_duplicity_backup():
    """Test that duplicity_backup can be imported."""
    import duplicity_backup

    assert hasattr(duplicity_backup, "__version__")
    assert duplicity_backup.__version__ == "1.0.0"


def test_version_format():
    """Test that version follows semver format."""
    import duplicity_backup

    parts = duplicity_backup.__version__.split(".")
    assert len(parts) == 3
    assert all(p.isdigit() for p in parts)


def test_public_api():
    import duplicity_backup

    for name in duplicity_backup.__all__:
        assert hasattr(duplicity_backup, name)
