from __future__ import annotations

from release_script.core.config import CONFIG_KEY, ReleaseOptions, load_options
from release_script.core.errors import ErrorCode
from release_script.core.result import Err, Ok


def test_missing_table_uses_defaults() -> None:
    result = load_options({"name": "demo", "version": "1.0.0"})
    assert result == Ok(ReleaseOptions())

    options = result.unwrap()
    assert options.bower_repo is None
    assert options.bower_root == "amd/"
    assert options.tmp_bower_repo == "tmp-bower-repo"
    assert options.docs_root == "docs-built/"
    assert options.tmp_docs_repo == "tmp-docs-repo"
    assert options.default_dry_run is False


def test_reads_camel_case_keys() -> None:
    manifest = {
        CONFIG_KEY: {
            "bowerRepo": "git@github.com:org/demo-bower.git",
            "bowerRoot": "dist/amd/",
            "bowerRegister": True,
            "docsRepo": "git@github.com:org/demo-docs.git",
            "tmpDocsRepo": "scratch-docs",
            "altPkgRootFolder": "lib",
            "skipBuildStep": True,
            "defaultDryRun": True,
        }
    }

    options = load_options(manifest).unwrap()
    assert options.bower_repo == "git@github.com:org/demo-bower.git"
    assert options.bower_root == "dist/amd/"
    assert options.bower_register is True
    assert options.docs_repo == "git@github.com:org/demo-docs.git"
    assert options.tmp_docs_repo == "scratch-docs"
    assert options.docs_root == "docs-built/"
    assert options.alt_pkg_root_folder == "lib"
    assert options.skip_build_step is True
    assert options.default_dry_run is True


def test_blank_paths_fall_back_to_defaults() -> None:
    options = load_options({CONFIG_KEY: {"bowerRoot": "  ", "bowerRepo": ""}}).unwrap()
    assert options.bower_root == "amd/"
    assert options.bower_repo is None


def test_table_must_be_an_object() -> None:
    result = load_options({CONFIG_KEY: "nope"})
    assert isinstance(result, Err)
    assert result.error.key == CONFIG_KEY


def test_flag_must_be_boolean() -> None:
    result = load_options({CONFIG_KEY: {"defaultDryRun": "yes"}})
    assert isinstance(result, Err)
    assert result.error.key == "defaultDryRun"


def test_path_must_be_string() -> None:
    result = load_options({CONFIG_KEY: {"docsRoot": 3}})
    assert isinstance(result, Err)
    assert result.error.key == "docsRoot"


def test_error_codes() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.FAILURE.is_success
    assert int(ErrorCode.FAILURE) == 1
    assert str(ErrorCode.FAILURE) == "failure"
