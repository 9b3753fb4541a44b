"""
Stroke Geometry Analysis
Derives scalar and vector metrics from a captured pointer path and buckets
the stroke into a coarse shape type.

The classifier is an approximation for display purposes, not a shape matcher:
strokes that are neither strongly axis-aligned nor clearly curved fall back to
``diagonal``.
"""
import math
from collections import Counter
from typing import Sequence

from app.models.stroke import (
    BoundingBox,
    Direction,
    Point,
    Stroke,
    StrokeAnalysis,
    StrokeSummary,
    StrokeType,
)


DOT_MAX_LENGTH = 10.0
AXIS_DOMINANT = 0.8
AXIS_MINOR = 0.3
DIAGONAL_MIN = 0.4
CURVE_MIN_POINTS = 5
CURVE_TURN_DEGREES = 30.0
CURVE_TURN_RATIO = 0.1


def path_length(path: Sequence[Point]) -> float:
    """Sum of Euclidean distances between consecutive points."""
    if len(path) < 2:
        return 0.0
    return sum(
        math.hypot(curr.x - prev.x, curr.y - prev.y)
        for prev, curr in zip(path, path[1:])
    )


def path_direction(path: Sequence[Point]) -> Direction:
    """Unit vector from the first to the last point, zero when undefined."""
    if len(path) < 2:
        return Direction()

    dx = path[-1].x - path[0].x
    dy = path[-1].y - path[0].y
    magnitude = math.hypot(dx, dy)
    if magnitude == 0:
        return Direction()

    return Direction(x=dx / magnitude, y=dy / magnitude)


def bounding_box(path: Sequence[Point]) -> BoundingBox:
    """Component-wise min/max over all points."""
    if not path:
        return BoundingBox()

    xs = [point.x for point in path]
    ys = [point.y for point in path]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)

    return BoundingBox(
        min_x=min_x,
        min_y=min_y,
        max_x=max_x,
        max_y=max_y,
        width=max_x - min_x,
        height=max_y - min_y
    )


def average_pressure(path: Sequence[Point]) -> float:
    """Mean pointer pressure, counting points without pressure as 1.0."""
    if not path:
        return 1.0
    return sum(
        point.pressure if point.pressure is not None else 1.0
        for point in path
    ) / len(path)


def count_sharp_turns(path: Sequence[Point], threshold_degrees: float = CURVE_TURN_DEGREES) -> int:
    """
    Count interior points where the path turns by more than the threshold.

    The turning angle at each point is the difference between the heading of
    the incoming and outgoing segments, wrapped to [-180, 180) degrees.
    """
    threshold = math.radians(threshold_degrees)
    turns = 0

    for prev, curr, nxt in zip(path, path[1:], path[2:]):
        incoming = math.atan2(curr.y - prev.y, curr.x - prev.x)
        outgoing = math.atan2(nxt.y - curr.y, nxt.x - curr.x)
        angle = outgoing - incoming
        # Wrap to [-pi, pi)
        angle = (angle + math.pi) % (2 * math.pi) - math.pi
        if abs(angle) > threshold:
            turns += 1

    return turns


def classify_stroke(stroke: Stroke, length: float, direction: Direction) -> StrokeType:
    """
    Bucket a stroke into one of the five shape types.

    Args:
        stroke: The captured stroke (its path is used for curvature)
        length: Precomputed path length
        direction: Precomputed first-to-last unit vector

    Returns:
        The stroke type
    """
    if length < DOT_MAX_LENGTH:
        return StrokeType.DOT

    ax, ay = abs(direction.x), abs(direction.y)

    if ax > AXIS_DOMINANT and ay < AXIS_MINOR:
        return StrokeType.HORIZONTAL
    if ay > AXIS_DOMINANT and ax < AXIS_MINOR:
        return StrokeType.VERTICAL
    if ax > DIAGONAL_MIN and ay > DIAGONAL_MIN:
        return StrokeType.DIAGONAL

    point_count = len(stroke.path)
    if point_count >= CURVE_MIN_POINTS:
        turns = count_sharp_turns(stroke.path)
        if turns > point_count * CURVE_TURN_RATIO:
            return StrokeType.CURVE

    return StrokeType.DIAGONAL


def analyze_stroke(stroke: Stroke) -> StrokeAnalysis:
    """
    Compute all metrics for a single stroke.

    Pure and deterministic: the same stroke always yields the same analysis.
    """
    length = path_length(stroke.path)
    duration = stroke.end_time - stroke.start_time
    speed = length / duration if duration > 0 else 0.0
    direction = path_direction(stroke.path)

    return StrokeAnalysis(
        length=length,
        duration=duration,
        speed=speed,
        direction=direction,
        type=classify_stroke(stroke, length, direction),
        point_count=len(stroke.path),
        average_pressure=average_pressure(stroke.path),
        bounding_box=bounding_box(stroke.path)
    )


def summarize_strokes(strokes: Sequence[Stroke]) -> StrokeSummary:
    """Aggregate analyses of all strokes drawn for one character."""
    if not strokes:
        return StrokeSummary()

    analyses = [analyze_stroke(stroke) for stroke in strokes]
    count = len(analyses)

    return StrokeSummary(
        total_strokes=count,
        total_time=sum(max(0, analysis.duration) for analysis in analyses),
        average_speed=sum(analysis.speed for analysis in analyses) / count,
        average_stroke_length=sum(analysis.length for analysis in analyses) / count,
        stroke_types=dict(Counter(analysis.type for analysis in analyses))
    )
