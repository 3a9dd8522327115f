from .csv_writer import CSVWriter, FIELDNAMES, write_records
