# lumentrace

Core pieces of a physically based ray tracer, written with NumPy and Pillow.

## Modules

### `lumentrace.common`

- Constants: `EPSILON` (1e-4, the ray-offset threshold), `S_EPSILON`,
  `INV_PI`, `INV_TWOPI`, `INV_FOURPI`, `SQRT_TWO`, `INV_SQRT_TWO`.
- `EMeasure`: the sampling measures `UNKNOWN`, `SOLID_ANGLE` and `DISCRETE`.
- `RenderError`: raised for invalid scene data or queries.
- `clamp(value, minimum, maximum)`, `lerp(t, v1, v2)`,
  `rad_to_deg(value)`, `deg_to_rad(value)`.
- `mod(a, b)`: the remainder of truncated division, shifted by `b` once when
  negative.

### `lumentrace.mesh`

- `Ray(origin, direction, mint=EPSILON, maxt=inf, medium=None)` with
  `point_at(t)`.
- `TriangleMesh(vertices, faces, normals=None, uvs=None, name="", bsdf=None, emitter=None)`:
  - `primitive_count()`, `surface_area(index)`, `centroid(index)`,
    `bounding_box(index)` (returns `(min_corner, max_corner)`);
  - `ray_intersect(index, ray)`: Möller–Trumbore test, returning
    `(u, v, t)` or `None` when there is no hit with `mint <= t <= maxt`;
  - `interpolated_vertex(index, bc)` and `interpolated_normal(index, bc)`
    (the latter normalised; raises `RenderError` if the mesh has no normals).

### `lumentrace.spotlight`

- `SpotLight(position, intensity, to_world=None, theta_max=30.0, theta_fall=5.0, base_color)`
  emits along its local −z axis. Angles are in degrees: full intensity inside
  `theta_fall`, falling linearly to zero at `theta_max`.
- `sample(ref)` returns `(EmitterSample, radiance)`; the record holds the
  light position `p`, direction `wi`, `pdf` of 1 and a `shadow_ray` ending
  just before the light. Radiance falls off with the squared distance.
- `eval` always returns black, `pdf` returns 0 and `is_delta()` returns `True`.

### `lumentrace.kdtree`

- `PointKDTree(heuristic=Heuristic.SLIDING_MIDPOINT)` over points of any
  fixed dimension; `Heuristic.BALANCED` splits at the median instead.
- `append(position, data=None)` adds a point and returns its index;
  `clear()` empties the tree; `build(recompute_bounding_box)` builds the
  hierarchy (raising `RenderError` when empty) and reorders the nodes, which
  can be read back with `tree[i]` as `KDNode` objects (`position`, `data`, …).
- `search(p, search_radius)` returns the indices of all nodes strictly closer
  than the radius.
- `nn_search(p, k, sqr_search_radius=inf)` returns the up to `k` nearest
  nodes as `SearchResult(dist_squared, index)` sorted by distance, together
  with the squared radius that was finally needed.
- `permute_inplace(data, perm)` applies a permutation to a list in place.

### `lumentrace.texture_map`

- `ImageTexture(pixels, scale=(1, 1), filename="", srgb=False)`: a scalar
  `(h, w)` or colour `(h, w, 3)` grid. `eval(uv)` wraps UVs into `[0, 1)`,
  treats the bottom-left as the UV origin and filters bilinearly with
  wrap-around; with `srgb=True` values are returned in linear RGB.
- `NormalMap(normals, scale=(1, 1), filename="")`: tangent-space normals;
  `eval(uv)` interpolates without renormalising.
- `srgb_to_linear(value)`.
- Loaders: `load_texture(filename, scale)` (PNG/JPEG, sRGB colour),
  `load_float_texture(filename, scale)` (PNG, single channel),
  `load_normal_map(filename, scale)` (PNG/JPEG, RGB mapped from `[0, 1]` to
  `[-1, 1]` and normalised). They raise `RenderError` for missing or
  unreadable files.

### `lumentrace.homogeneous`

- `HomogeneousMedium(sigma_a, sigma_s, sample_emitter=True, le, phase_function=None)`:
  - `transmittance(ray)` and `emission(ray)` along the ray up to `maxt`;
  - `sample(ray, sampler)`: samples a free-flight distance using
    `sampler.next_1d()` and returns `(weight, interaction)`, where
    `interaction` is a `MediumInteraction(p, wo, phase)` when the ray
    scatters before `maxt` and `None` otherwise.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
import numpy as np
from lumentrace.mesh import Ray, TriangleMesh
from lumentrace.kdtree import PointKDTree

mesh = TriangleMesh(
    vertices=np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float),
    faces=np.array([[0, 1, 2]]),
)
ray = Ray(origin=np.array([0.2, 0.2, 1.0]), direction=np.array([0.0, 0.0, -1.0]))
hit = mesh.ray_intersect(0, ray)   # (u, v, t) or None

tree = PointKDTree()
for i, p in enumerate(np.random.default_rng(1).random((100, 3))):
    tree.append(p, i)
tree.build(False)
nearest, radius_sq = tree.nn_search(np.array([0.5, 0.5, 0.5]), 4, float("inf"))
```

## What this package does not do

It is a library of components, not a renderer. There is no scene file
loader, no camera, no BSDFs, no integrators, no image output and no
command-line program or viewer. Textures are read only from PNG and JPEG
files; HDR formats such as OpenEXR are not supported.