_instruments = ("botocore ~= 1.0",)
