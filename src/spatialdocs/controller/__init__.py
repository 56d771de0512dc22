"""
The CONTROLLER layer turns pointer gestures and commands into model writes:
dragging, docking/centering, the viewer overlay and action drops.
"""
