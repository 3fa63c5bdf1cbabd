"""Model metadata, model and database registration, and SQL condition building."""