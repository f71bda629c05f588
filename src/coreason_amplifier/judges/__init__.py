"""Code execution judge clients."""
