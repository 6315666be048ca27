"""
Download MEPS public use files from the MEPS website.

Files are published as zipped SAS transport files at
``https://meps.ahrq.gov/mepsweb/data_files/pufs/<name>ssp.zip`` (or,
for newer releases, inside a ``<name>/`` folder). Retries with backoff
are handled by the requests session; callers see one RemoteFetchError
when every attempt fails.
"""

import io
import os
import shutil
import tempfile
import zipfile

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from meps import config
from meps.errors import RemoteFetchError
from meps.logging_config import StepTimer, get_logger
from meps.selector import find_local_file

log = get_logger(__name__)


def make_session(
    max_retries: int = config.HTTP_MAX_RETRIES,
    backoff_factor: float = config.HTTP_BACKOFF_FACTOR,
    status_forcelist: tuple = config.HTTP_RETRY_STATUSES,
    user_agent: str = config.USER_AGENT,
) -> requests.Session:
    """Create a requests.Session with automatic retry and backoff.

    Parameters
    ----------
    max_retries : int
        Total retry attempts per request.
    backoff_factor : float
        Exponential backoff multiplier (0.5 → 0.5s, 1s, 2s, ...).
    status_forcelist : tuple
        HTTP status codes that trigger a retry.
    user_agent : str
        User-Agent header value.

    Returns
    -------
    requests.Session
        Configured session with retry adapter mounted.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})

    retry = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=list(status_forcelist),
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def strip_extension(identifier: str) -> str:
    """``"H171.ssp"`` -> ``"h171"``."""
    name = str(identifier).strip().lower()
    if name.endswith(config.SSP_EXTENSION):
        name = name[: -len(config.SSP_EXTENSION)]
    return name


def puf_urls(identifier: str) -> list[str]:
    """Candidate zip URLs for *identifier*, in the order they are tried."""
    name = strip_extension(identifier)
    return [
        tpl.format(base=config.MEPS_PUF_BASE_URL, name=name)
        for tpl in config.PUF_URL_TEMPLATES
    ]


def _stream_to_file(response, path):
    with open(path, "wb") as f:
        for chunk in response.iter_content(chunk_size=config.HTTP_CHUNK_SIZE):
            if chunk:
                f.write(chunk)


def download_zip(identifier, dest_dir, session=None) -> str:
    """Download the zipped .ssp for *identifier* into *dest_dir*.

    Each candidate URL is tried in turn; a 404 moves on to the next one,
    any other failure aborts.

    Returns
    -------
    str
        Path to the downloaded zip.
    """
    session = session or make_session()
    name = strip_extension(identifier)
    zip_path = os.path.join(dest_dir, f"{name}ssp.zip")

    for url in puf_urls(identifier):
        log.debug("Requesting %s", url)
        try:
            with session.get(url, stream=True, timeout=config.HTTP_TIMEOUT_SECONDS) as r:
                if r.status_code == 404:
                    log.debug("Not found at %s", url)
                    continue
                r.raise_for_status()
                _stream_to_file(r, zip_path)
        except requests.RequestException as exc:
            raise RemoteFetchError(identifier, str(exc)) from exc
        log.info("Downloaded %s", url)
        return zip_path

    raise RemoteFetchError(identifier, "file not found on the MEPS website")


def extract_ssp(zip_path, dest_dir, identifier=None) -> str:
    """Extract the .ssp member of *zip_path* into *dest_dir*.

    Returns
    -------
    str
        Path to the extracted .ssp file.
    """
    identifier = identifier or os.path.basename(zip_path)
    try:
        with zipfile.ZipFile(zip_path) as zf:
            members = [
                m for m in zf.namelist()
                if m.lower().endswith(config.SSP_EXTENSION) and not m.endswith("/")
            ]
            if not members:
                raise RemoteFetchError(identifier, "archive contains no .ssp file")
            member = members[0]
            out_path = os.path.join(dest_dir, os.path.basename(member))
            with zf.open(member) as src, open(out_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
    except (zipfile.BadZipFile, OSError) as exc:
        raise RemoteFetchError(identifier, f"bad archive: {exc}") from exc
    return out_path


def dl_meps(identifier, dest_dir=None, session=None) -> str:
    """Download *identifier* and return the path of the extracted .ssp file.

    Each call uses its own temporary directory unless *dest_dir* is
    given, so concurrent downloads never write to the same path. The
    caller owns the returned file; a temporary directory created here is
    removed only if the download fails.
    """
    own_dir = dest_dir is None
    if own_dir:
        dest_dir = tempfile.mkdtemp(prefix="meps_")
    try:
        with StepTimer() as t:
            zip_path = download_zip(identifier, dest_dir, session=session)
            ssp_path = extract_ssp(zip_path, dest_dir, identifier)
        os.remove(zip_path)
    except Exception:
        if own_dir:
            shutil.rmtree(dest_dir, ignore_errors=True)
        raise
    log.debug("Fetched %s in %.1fs", identifier, t.elapsed)
    return ssp_path


def fetch_ssp(identifier, session=None) -> io.BytesIO:
    """Download *identifier* and return the .ssp contents in memory.

    Default fetcher for read_meps(): nothing is left on disk once it
    returns.
    """
    with tempfile.TemporaryDirectory(prefix="meps_") as tmp_dir:
        ssp_path = dl_meps(identifier, dest_dir=tmp_dir, session=session)
        with open(ssp_path, "rb") as f:
            return io.BytesIO(f.read())


def download_ssp(identifier, directory=".", force=False, session=None) -> str:
    """Save the .ssp file for *identifier* into *directory*.

    Populates a local directory so later reads find the file there.
    Existing files are kept unless *force* is set.

    Returns
    -------
    str
        Path of the .ssp file in *directory*.
    """
    directory = os.fspath(directory)
    os.makedirs(directory, exist_ok=True)

    existing = find_local_file(identifier, directory)
    if existing is not None and not force:
        log.info("%s already present in %s", existing, directory)
        return os.path.join(directory, existing)

    tmp_dir = tempfile.mkdtemp(prefix="meps_", dir=directory)
    try:
        ssp_path = dl_meps(identifier, dest_dir=tmp_dir, session=session)
        final_path = os.path.join(directory, existing or os.path.basename(ssp_path).lower())
        os.replace(ssp_path, final_path)
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)

    log.info("Saved %s to %s", os.path.basename(final_path), directory)
    return final_path
