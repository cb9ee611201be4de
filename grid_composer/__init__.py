"""
Labeled image grid composer.

Contains:
- config.py: Resolves command-line/YAML input into an immutable GridSpec
- layout.py: Cell geometry and aspect-fit placement
- drawing.py: Scoped drawing context (transform/fill/font stack) over a Pillow canvas
- labels.py: Row/column labels, gridline mesh and header separators
- compositor.py: Per-cell image loading (or error placeholder) and compositing
- encoder.py: JPEG serialization of the finished canvas
- create_grid.py: Command-line entry point
"""
