from typing import Optional

from ..schemas import LicensePayload
from ..types import LicenseInfo, RepositoryRef

# license families that can be combined with LGPLv2.1 code
LGPL_COMPATIBLE = (
    "mit",
    "bsd",
    "apache",
    "lgpl",
    "mpl",
    "isc",
    "zlib",
    "unlicense",
    "cc0",
    "artistic",
)


def is_lgpl_compatible(spdx_id: Optional[str], name: str) -> bool:
    candidates = [(spdx_id or "").lower(), name.lower()]
    if any("agpl" in c or ("gpl" in c and "lgpl" not in c) for c in candidates):
        return False
    return any(family in c for c in candidates for family in LGPL_COMPATIBLE)


def license_info(payload: Optional[LicensePayload]) -> Optional[LicenseInfo]:
    """Structured license description, or None when the repository declares none."""
    if payload is None or payload.license is None:
        return None
    detail = payload.license
    spdx_id = detail.spdx_id if detail.spdx_id not in (None, "", "NOASSERTION") else None
    return LicenseInfo(
        spdx_id=spdx_id,
        name=detail.name,
        lgpl_compatible=is_lgpl_compatible(spdx_id, detail.name),
    )


class LicenseMetric:
    name = "license"

    def compute(self, ref: RepositoryRef, handler) -> Optional[LicenseInfo]:
        return license_info(handler.fetch_license(ref))
