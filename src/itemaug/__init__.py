r"""Composable transforms of typed data items for PyTorch input pipelines."""
