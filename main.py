# main.py
from roadnav.app.build import build
from roadnav.domain.entities.geography import Way


def run():
    # A small grid near Berkeley: Shattuck runs north-south, Center St east-west.
    nodes = [
        (1, -122.2690, 37.8690, None),
        (2, -122.2690, 37.8700, "Shattuck & Center"),
        (3, -122.2690, 37.8710, None),
        (4, -122.2675, 37.8700, None),
        (5, -122.2660, 37.8700, "Center & Oxford"),
        (6, -122.2500, 37.8800, None),  # no roads: pruned on freeze
    ]
    ways = [
        Way.of([1, 2, 3], name="Shattuck Avenue"),
        Way.of([2, 4, 5], name="Center Street"),
        Way.of([5, 99], name="Broken Way"),  # references a missing node: skipped
    ]
    app = build({"name": "demo", "turns": {"kind": "bearing"}}, nodes=nodes, ways=ways)

    path = app.shortest_path(-122.2691, 37.8689, -122.2659, 37.8701)
    for d in app.route_directions(path):
        print(d)


if __name__ == "__main__":
    run()
