"""
Projections between geodetic space and world space.

Every projection is available as a shared module-level instance:

- ``identity_projection``: radians as world units
- ``equirectangular_projection`` / ``normalized_equirectangular_projection``
- ``cylindrical_projection``: central cylindrical
- ``mercator_projection`` / ``web_mercator_projection``
- ``transverse_mercator_projection``
- ``sphere_projection``: Earth-centered 3D
"""

from projections.base import (
    Projection,
    ProjectionType,
    batch_project,
    batch_unproject,
)

from projections.planar import (
    IdentityProjection,
    EquirectangularProjection,
    CylindricalProjection,
    identity_projection,
    equirectangular_projection,
    normalized_equirectangular_projection,
    cylindrical_projection,
)

from projections.mercator import (
    MercatorConstants,
    MercatorProjection,
    WebMercatorProjection,
    mercator_projection,
    web_mercator_projection,
)

from projections.transverse_mercator import (
    TransverseMercatorProjection,
    TransverseMercatorUtils,
    transverse_mercator_projection,
)

from projections.sphere import (
    SphereProjection,
    sphere_projection,
)

__all__ = [
    # Interface
    "Projection",
    "ProjectionType",
    "batch_project",
    "batch_unproject",
    # Planar
    "IdentityProjection",
    "EquirectangularProjection",
    "CylindricalProjection",
    "identity_projection",
    "equirectangular_projection",
    "normalized_equirectangular_projection",
    "cylindrical_projection",
    # Mercator family
    "MercatorConstants",
    "MercatorProjection",
    "WebMercatorProjection",
    "mercator_projection",
    "web_mercator_projection",
    "TransverseMercatorProjection",
    "TransverseMercatorUtils",
    "transverse_mercator_projection",
    # Spherical
    "SphereProjection",
    "sphere_projection",
]
