"""Runtime configuration for the booking Lambdas."""
