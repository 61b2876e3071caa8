"""returnleg: total return swap asset return leg cashflows."""
