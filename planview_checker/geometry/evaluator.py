from planview_checker import config
from .curves import ArcCurve, EvaluatedCurve, LineCurve, Poly3Curve, SpiralCurve
from .primitives import Arc, GeometryPrimitive, Line, Poly3, Spiral


def evaluate(
    primitive: GeometryPrimitive,
    rel_tol: float = config.THRESHOLDS["spiral_rel_tolerance"],
    min_subdivisions: int = config.THRESHOLDS["spiral_min_subdivisions"],
    max_subdivisions: int = config.THRESHOLDS["spiral_max_subdivisions"],
) -> EvaluatedCurve:
    """
    Turn one geometry record into its parametric curve.

    Degenerate shapes are redirected: a zero-curvature arc is a line and a
    spiral with equal end curvatures is an arc (or a line).
    """
    shape = primitive.shape

    if isinstance(shape, Line):
        return LineCurve(primitive)

    if isinstance(shape, Arc):
        if shape.curvature == 0.0:
            return LineCurve(primitive)
        return ArcCurve(primitive, shape.curvature)

    if isinstance(shape, Spiral):
        if shape.curv_start == shape.curv_end:
            if shape.curv_start == 0.0:
                return LineCurve(primitive)
            return ArcCurve(primitive, shape.curv_start)
        return SpiralCurve(
            primitive,
            shape.curv_start,
            shape.curv_end,
            rel_tol=rel_tol,
            min_subdivisions=min_subdivisions,
            max_subdivisions=max_subdivisions,
        )

    if isinstance(shape, Poly3):
        return Poly3Curve(
            primitive,
            shape,
            rel_tol=rel_tol,
            min_subdivisions=min_subdivisions,
            max_subdivisions=max_subdivisions,
        )

    raise TypeError(f"unsupported geometry shape: {type(shape).__name__}")
