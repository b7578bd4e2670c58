"""Repository layer persisting registry state outside the process."""
