"""
snake_ai: BFS-driven AI opponent for a two-player grid snake game.

  board        – Board, positions and direction constants.
  pathfinding  – BFSPathfinder: time-bounded shortest paths, safety scores.
  snake        – Snake entity and the MobileEntity interface.
  food         – Food pellet types.
  ai_snake     – AISnake decision cycle.
  game         – Headless game loop.
  opponents    – Scripted player controllers.
"""
