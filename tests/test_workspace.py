import pytest

from foundry_mcp.executor import CommandResult
from foundry_mcp.workspace import Workspace, WorkspaceError

from .conftest import FakeExecutor


@pytest.fixture
def workspace(tmp_path, executor):
    root = tmp_path / "ws"
    root.mkdir()
    (root / "foundry.toml").write_text("[profile.default]\n")
    return Workspace(root, "forge", executor)


@pytest.mark.asyncio
async def test_first_use_creates_and_initializes(tmp_path, executor):
    ws = Workspace(tmp_path / "fresh", "forge", executor)
    root = await ws.ensure_initialized()
    assert root.is_dir()
    assert executor.calls == [(["forge", "init", "--no-git", "--force"], str(tmp_path / "fresh"))]


@pytest.mark.asyncio
async def test_initialized_workspace_is_left_alone(workspace, executor):
    await workspace.ensure_initialized()
    assert executor.calls == []


@pytest.mark.asyncio
async def test_init_failure_raises(tmp_path):
    executor = FakeExecutor({"init": CommandResult(False, "forge: permission denied")})
    with pytest.raises(WorkspaceError, match="permission denied"):
        await Workspace(tmp_path / "ws", "forge", executor).ensure_initialized()


def test_write_creates_parent_directories(workspace):
    target = workspace.write_file("src/tokens/Token.sol", "contract Token {}")
    assert target.read_text() == "contract Token {}"
    assert (workspace.root / "src" / "tokens").is_dir()


def test_write_existing_without_overwrite_is_rejected(workspace):
    workspace.write_file("src/A.sol", "original")
    with pytest.raises(FileExistsError):
        workspace.write_file("src/A.sol", "changed")
    assert workspace.read_file("src/A.sol") == "original"


def test_write_existing_with_overwrite(workspace):
    workspace.write_file("src/A.sol", "original")
    workspace.write_file("src/A.sol", "changed", overwrite=True)
    assert workspace.read_file("src/A.sol") == "changed"


def test_read_missing_file(workspace):
    with pytest.raises(FileNotFoundError):
        workspace.read_file("src/Missing.sol")


def test_paths_cannot_escape_root(workspace):
    with pytest.raises(WorkspaceError):
        workspace.write_file("../outside.txt", "x")
    with pytest.raises(WorkspaceError):
        workspace.read_file("/etc/passwd")


def test_list_empty_directory(workspace):
    (workspace.root / "script").mkdir()
    assert workspace.list_files("script") == []


def test_list_nested_files_relative_to_listed_dir(workspace):
    workspace.write_file("src/Token.sol", "")
    workspace.write_file("src/interfaces/IToken.sol", "")
    workspace.write_file("src/lib/math/FixedPoint.sol", "")
    assert workspace.list_files("src") == [
        "Token.sol",
        "interfaces/IToken.sol",
        "lib/math/FixedPoint.sol",
    ]


def test_list_root_excludes_directories(workspace):
    workspace.write_file("src/A.sol", "")
    assert workspace.list_files() == ["foundry.toml", "src/A.sol"]


def test_list_missing_directory(workspace):
    with pytest.raises(FileNotFoundError):
        workspace.list_files("nope")
