DEFAULT_PASSWORD = "Secret@123"
TOTAL_SEATS = 80
SEATS_PER_ROW = 7
