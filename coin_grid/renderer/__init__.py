"""Rendering subpackage.

Turns the visibility window of an immutable ``State`` into an image:

* One circle per visible cache, labelled with its current value.
* Interactive caches are colored by value; out-of-reach and emptied caches
  are grayed out.
* Lightweight Pillow drawing, no texture assets required.

See :mod:`coin_grid.renderer.texture` for the drawing routine.
"""
