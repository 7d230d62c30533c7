"""Black-box computational primitives: Open Babel and GROMACS."""
