"""CropSense: crop demand, price and glut-risk forecasting backend."""
