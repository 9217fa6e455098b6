"""Infrastructure layer: process execution, configuration and console I/O."""
