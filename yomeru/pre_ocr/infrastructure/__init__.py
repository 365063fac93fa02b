"""Pre-OCR Infrastructure: низкоуровневые фильтры."""
