"""Refraction with full Fresnel equations.

The reflected fraction of light at a dielectric boundary is computed from
Snell's law and the s- and p-polarised Fresnel terms:

    rs = (etat cos_i - etai cos_t) / (etat cos_i + etai cos_t)
    rp = (etai cos_i - etat cos_t) / (etai cos_i + etat cos_t)
    R  = (rs^2 + rp^2) / 2

Beyond the critical angle R is 1 (total internal reflection) and no
refracted ray exists. The outside medium always has index 1.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rayshade.materials.refractive import fresnel
    >>> # Use within a Taichi kernel:
    >>> # reflect_ratio, refracted = fresnel(incident, normal, 1.5)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def fresnel(incident: vec3, normal: vec3, ior: ti.f32):
    """Compute the Fresnel reflectance and the refracted direction.

    A negative incident . normal means the ray enters the surface
    (etai = 1, etat = ior). Otherwise it leaves it: the indices are swapped
    and the normal is flipped.

    Args:
        incident: Unit direction of the incoming ray.
        normal: Unit geometric (outward) normal.
        ior: Index of refraction of the material.

    Returns:
        A tuple (reflect_ratio, refracted) where reflect_ratio is in [0, 1]
        and refracted is the unit transmitted direction, or the zero vector
        under total internal reflection.
    """
    cosi = tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    etai = 1.0
    etat = ior
    n = normal
    if cosi < 0.0:
        cosi = -cosi
    else:
        etai = ior
        etat = 1.0
        n = -normal

    eta = etai / etat
    k = 1.0 - eta * eta * (1.0 - cosi * cosi)
    sint = eta * ti.sqrt(ti.max(0.0, 1.0 - cosi * cosi))

    reflect_ratio = 1.0
    refracted = vec3(0.0, 0.0, 0.0)
    if sint < 1.0:
        cost = ti.sqrt(ti.max(0.0, 1.0 - sint * sint))
        rs = (etat * cosi - etai * cost) / (etat * cosi + etai * cost)
        rp = (etai * cosi - etat * cost) / (etai * cosi + etat * cost)
        reflect_ratio = (rs * rs + rp * rp) / 2.0

    if reflect_ratio < 1.0:
        refracted = tm.normalize(eta * incident + (eta * cosi - ti.sqrt(ti.max(0.0, k))) * n)

    return reflect_ratio, refracted
