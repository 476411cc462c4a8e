import numpy as np


def circle_points(n, radius=10.0, center=(50.0, 50.0)):
    t = 2.0 * np.pi * np.arange(n) / n
    return np.column_stack([center[0] + radius * np.cos(t), center[1] + radius * np.sin(t)])


def square_points(side=4):
    """Unit-spaced outline of a ``side`` x ``side`` square, counter-clockwise."""
    pts = []
    for x in range(side):
        pts.append((x, 0))
    for y in range(side):
        pts.append((side, y))
    for x in range(side, 0, -1):
        pts.append((x, side))
    for y in range(side, 0, -1):
        pts.append((0, y))
    return np.array(pts, dtype=float)
