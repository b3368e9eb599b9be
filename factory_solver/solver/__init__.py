"""
Solver module for factory machines.

Toggle variant: breadth-first search over indicator bitmasks.
Increment variant: reduction, exact rational echelon form and a bounded
search over the free columns, with an optional ILP cross-check.
"""
