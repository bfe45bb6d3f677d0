"""Provider bootstrap - check the rosa CLI and log it in before any workflow.

When `rosa` is not on PATH, the minimum supported release is downloaded from
the OpenShift mirror into the data directory and used from there.
"""

import io
import logging
import shutil
import sys
import tarfile
from pathlib import Path

import httpx

from rosa_lifecycle.lib import paths
from rosa_lifecycle.lib.context import RosaContext
from rosa_lifecycle.lib.errors import (
    DecodeError,
    ExternalCallFailedError,
    ProviderError,
    RosaVersionError,
)
from rosa_lifecycle.lib.result import Err, Ok, Result, map_err, map_ok
from rosa_lifecycle.lib.rosa import MINIMUM_VERSION
from rosa_lifecycle.models import Version

logger = logging.getLogger(__name__)

ROSA_MIRROR_URL = "https://mirror.openshift.com/pub/openshift-v4/clients/rosa"

# sys.platform -> release archive name on the mirror
_ARCHIVES = {
    "linux": "rosa-linux.tar.gz",
    "darwin": "rosa-macosx.tar.gz",
}

DOWNLOAD_TIMEOUT_SECONDS = 300.0


def rosa_download_url(
    platform: str, version: str = MINIMUM_VERSION
) -> Result[str, ExternalCallFailedError]:
    """Mirror URL of the rosa release archive for a platform."""
    archive = _ARCHIVES.get(platform)
    if archive is None:
        reason = f"operating system {platform!r} is not supported"
        return Err(ExternalCallFailedError("rosa download", reason))
    return Ok(f"{ROSA_MIRROR_URL}/{version}/{archive}")


def download_rosa(
    bin_dir: Path,
    *,
    platform: str = sys.platform,
    version: str = MINIMUM_VERSION,
    http_client: httpx.Client | None = None,
) -> Result[str, ExternalCallFailedError]:
    """Download the rosa release archive and unpack the binary into bin_dir.

    Returns the path of the executable.
    """
    match rosa_download_url(platform, version):
        case Err() as e:
            return e
        case Ok(url):
            pass

    logger.info("Downloading rosa %s from %s", version, url)
    client = http_client or httpx.Client(timeout=DOWNLOAD_TIMEOUT_SECONDS, follow_redirects=True)
    try:
        resp = client.get(url)
    except httpx.HTTPError as e:
        return Err(ExternalCallFailedError("rosa download", f"failed to download {url}: {e}"))
    finally:
        if http_client is None:
            client.close()

    if resp.status_code >= 400:
        return Err(
            ExternalCallFailedError(
                "rosa download", f"failed to download {url}: HTTP {resp.status_code}"
            )
        )

    target = bin_dir / "rosa"
    try:
        with tarfile.open(fileobj=io.BytesIO(resp.content), mode="r:gz") as archive:
            member = next(
                (m for m in archive.getmembers() if m.isfile() and Path(m.name).name == "rosa"),
                None,
            )
            source = archive.extractfile(member) if member is not None else None
            if source is None:
                return Err(ExternalCallFailedError("rosa download", f"no rosa binary in {url}"))
            bin_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(source.read())
        target.chmod(0o755)
    except (tarfile.TarError, OSError) as e:
        return Err(ExternalCallFailedError("rosa download", f"failed to unpack {url}: {e}"))

    logger.info("rosa installed at %s", target)
    return Ok(str(target))


def find_rosa_binary(
    binary: str,
    *,
    bin_dir: Path | None = None,
    platform: str = sys.platform,
    http_client: httpx.Client | None = None,
) -> Result[str, ExternalCallFailedError]:
    """Resolve the rosa executable on PATH (or an explicit path).

    Falls back to a previously downloaded binary in bin_dir, then to
    downloading one.
    """
    path = shutil.which(binary)
    if path is not None:
        return Ok(path)

    bin_dir = bin_dir or paths.bin_dir()
    downloaded = bin_dir / "rosa"
    if downloaded.is_file():
        return Ok(str(downloaded))

    logger.info("%r not found on PATH", binary)
    return download_rosa(bin_dir, platform=platform, http_client=http_client)


def check_rosa_version(ctx: RosaContext) -> Result[Version, ProviderError]:
    """The rosa CLI must be at least MINIMUM_VERSION."""
    match ctx.rosa.run(["version"], ctx.credentials):
        case Err() as e:
            return e
        case Ok(output):
            pass

    lines = output.stdout.strip().splitlines()
    if not lines:
        return Err(DecodeError("rosa version", "failed to get version from cli standard out"))
    try:
        current = Version(lines[0].strip())
    except ValueError as e:
        return Err(DecodeError("rosa version", f"failed to parse version to semantic version: {e}"))

    if not current.at_least(Version(MINIMUM_VERSION)):
        return Err(RosaVersionError(current=current, minimum=MINIMUM_VERSION))
    return Ok(current)


def login(ctx: RosaContext) -> Result[None, ProviderError]:
    """`rosa login` against the context's OCM environment."""
    args = ["login", "--token", ctx.ocm_token, "--env", ctx.ocm_url]
    return map_ok(map_err(ctx.rosa.run(args, ctx.credentials), _login_failed), lambda _: None)


def _login_failed(error: ProviderError) -> ProviderError:
    match error:
        case ExternalCallFailedError(operation, reason):
            return ExternalCallFailedError(operation, f"login failed: {reason}")
        case _:
            return error


def connect(ctx: RosaContext, *, verify_aws: bool = True) -> Result[Version, ProviderError]:
    """Validate credentials, the rosa binary and its version, then log in.

    Returns the rosa CLI version.
    """
    match ctx.credentials.validate():
        case Err() as e:
            return e
        case Ok(_):
            pass

    if verify_aws:
        match ctx.credentials.verify():
            case Err() as e:
                return e
            case Ok(account_id):
                logger.info("Using AWS account %s in %s", account_id, ctx.region)

    match find_rosa_binary(ctx.rosa_binary):
        case Err() as e:
            return e
        case Ok(path):
            ctx.rosa.binary = path

    match check_rosa_version(ctx):
        case Err() as e:
            return e
        case Ok(version):
            pass

    match login(ctx):
        case Err() as e:
            return e
        case Ok(_):
            logger.info("rosa %s logged in to %s", version, ctx.ocm_url)
            return Ok(version)
