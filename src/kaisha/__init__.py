"""kaisha: legal core of a Japanese corporation.

Company, board, directors and the shareholder register as immutable
aggregates with validating commands that return ``Result`` values and emit
domain events.
"""

__version__ = "0.1.0"
