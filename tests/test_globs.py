from folder_scope.globs import CATCH_ALL_INCLUDE, to_exclude_globs, to_include_globs


def test_include_globs_translate_directories_in_order() -> None:
    assert to_include_globs(["src", "packages/*", "./"]) == [
        "./src/**/*.py",
        "./packages/*/**/*.py",
        "./**/*.py",
    ]


def test_include_globs_pass_file_patterns_through() -> None:
    assert to_include_globs(["tests/test_*.py", "./stubs/*.pyi", "lib/**/*.py"]) == [
        "./tests/test_*.py",
        "./stubs/*.pyi",
        "./lib/**/*.py",
    ]


def test_include_globs_trim_and_skip_blank_entries() -> None:
    assert to_include_globs(["  app/ ", "", "   ", None, 42]) == ["./app/**/*.py"]


def test_include_globs_keep_absolute_entries() -> None:
    assert to_include_globs(["/opt/code"]) == ["/opt/code/**/*.py"]


def test_include_globs_fall_back_to_catch_all() -> None:
    assert to_include_globs([]) == [CATCH_ALL_INCLUDE]
    assert to_include_globs(None) == [CATCH_ALL_INCLUDE]


def test_exclude_globs_keep_duplicates() -> None:
    assert to_exclude_globs([".venv", " build ", "", ".venv"]) == [
        "**/.venv/**",
        "**/build/**",
        "**/.venv/**",
    ]
