import nox
import nox_uv

nox.options.default_venv_backend = "uv"
nox.options.reuse_venv = "yes"

PYDANTIC_VERSIONS = ["2.7", "2.11"]


@nox_uv.session(python="3.10", uv_all_extras=True, uv_all_groups=True, uv_sync_locked=False)
@nox.parametrize("version", PYDANTIC_VERSIONS)
def pydantic(session: nox.Session, version: str) -> None:
    """Test pydantic compatibility across minor versions."""
    session.install(f"pydantic=={version}.*")
    session.run("pytest", "--durations=10")
