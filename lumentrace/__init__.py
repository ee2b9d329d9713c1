"""Ray tracing building blocks: meshes, spot lights, kd-trees, image textures and homogeneous media."""

__version__ = "0.1.0"
__all__ = ["common", "mesh", "spotlight", "kdtree", "texture_map", "homogeneous"]