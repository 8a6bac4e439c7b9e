SERVICE_NAME = "api-inventory"
