from jigsaw_puzzle.backend.engine.slicer.slicer import cell_boxes, slice_image

__all__ = ["cell_boxes", "slice_image"]
