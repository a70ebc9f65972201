"""Human and machine rendering of ServiceResult."""
