"""Shared fixtures: a small Rust workspace on disk."""

import pytest


GEO_SOURCE = """/// A point in the plane.
#[derive(Debug, Clone, Copy)]
pub struct Point {
    pub x: i32,
    pub y: i32,
}

/// Arithmetic on points.
impl Point {
    /// Adds two points.
    pub fn add(self, other: Point) -> Point {
        Point { x: self.x + other.x, y: self.y + other.y }
    }

    fn _internal(&self) {}
}

pub type Location = Point;
"""

MAIN_SOURCE = """mod geo;

use crate::geo::Point;

fn main() {
    let p = Point { x: 1, y: 2 };
    println!("{:?}", p.add(p));
}
"""


class RecordingSearcher:
    """Content searcher that records requests and returns canned output."""

    def __init__(self, output: str = ""):
        self.output = output
        self.requests = []

    def search(self, request):
        self.requests.append(request)
        return self.output


@pytest.fixture
def workspace(tmp_path):
    """A workspace with src/geo.rs (Point and its impl) and src/main.rs."""
    root = tmp_path / "ws"
    src = root / "src"
    src.mkdir(parents=True)
    (src / "geo.rs").write_text(GEO_SOURCE)
    (src / "main.rs").write_text(MAIN_SOURCE)
    return root


@pytest.fixture
def recording_searcher():
    return RecordingSearcher()
