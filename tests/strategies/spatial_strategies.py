"""Define strategies for generating 3D spatial data for property-based testing."""

import hypothesis.strategies as st

from grasp_generation.spatial import Point3D, Pose3D, Quaternion


def coordinates() -> st.SearchStrategy[float]:
    """Generate coordinates (meters) within a robot's workspace."""
    return st.floats(min_value=-10.0, max_value=10.0, allow_infinity=False, allow_nan=False)


@st.composite
def angles_rad(draw: st.DrawFn) -> float:
    """Generate random angles (in radians)."""
    return draw(st.floats(min_value=-10.0, max_value=10.0, allow_infinity=False, allow_nan=False))


@st.composite
def positions(draw: st.DrawFn) -> Point3D:
    """Generate random (x,y,z) points."""
    return Point3D(draw(coordinates()), draw(coordinates()), draw(coordinates()))


@st.composite
def quaternions(draw: st.DrawFn) -> Quaternion:
    """Generate random unit quaternions."""
    x = draw(st.floats(min_value=-100.0, max_value=100.0, allow_infinity=False, allow_nan=False))
    y = draw(st.floats(min_value=-100.0, max_value=100.0, allow_infinity=False, allow_nan=False))
    z = draw(st.floats(min_value=-100.0, max_value=100.0, allow_infinity=False, allow_nan=False))
    return Quaternion(x, y, z, w=1.0)


@st.composite
def poses_3d(draw: st.DrawFn, ref_frame: str | None = None) -> Pose3D:
    """Generate random relative poses in 3D space."""
    position = draw(positions())
    orientation = draw(quaternions())
    frame = draw(st.text(min_size=1, max_size=8)) if ref_frame is None else ref_frame
    return Pose3D(position, orientation, frame)


@st.composite
def angle_deltas(draw: st.DrawFn) -> float:
    """Generate positive angular steps (radians) yielding a manageable number of candidates."""
    return draw(st.floats(min_value=0.05, max_value=7.0, allow_infinity=False, allow_nan=False))
