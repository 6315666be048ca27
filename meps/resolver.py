"""Turn a dataset request into a canonical MEPS file name."""

from meps.dataset_request import ByIdentifier, ByYearType
from meps.errors import InvalidRequestError
from meps.puf_names import get_puf_names


def resolve(request, name_mapper=get_puf_names, remote=False) -> str:
    """Return the canonical identifier for *request*.

    ByIdentifier requests pass through unchanged; case and extension are
    dealt with at matching time. ByYearType requests are delegated to
    *name_mapper* as ``name_mapper(year, file_type, remote)``.
    """
    if isinstance(request, ByIdentifier):
        return str(request.identifier)

    if isinstance(request, ByYearType):
        return str(name_mapper(request.year, request.file_type, remote))

    raise InvalidRequestError("Must specify either file or year and type")
