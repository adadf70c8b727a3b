"""Infrastructure layer - keystore, dataset files, logging, stubs."""
