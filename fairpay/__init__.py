"""Fair-salary estimates from leave-one-out k-nearest-neighbours regression."""
