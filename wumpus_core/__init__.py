"""
Wumpus World core Python package.

Pure game logic with no rendering, so the web app, the CLI and the tests
all drive the same code.
Modules:
- world.py: World, Cell, Coord, generate_world
- percepts.py: Percept, compute_percepts
- state.py: Direction, Phase, PlayerState, GameState
- session.py: GameSession (action resolver, display notifications)
- scheduler.py: delayed callbacks (threaded or manual clock)
- view.py: JSON view model for displays
- particles.py: decorative ParticleField and FrameLoop
- config.py: environment settings
"""
